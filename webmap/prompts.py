"""Fixed instructional prompt templates."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from .errors import MissingPromptArgument, UnknownPrompt


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    description: str
    argument: str
    argument_description: str
    template: str

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [
                {
                    "name": self.argument,
                    "description": self.argument_description,
                    "required": True,
                }
            ],
        }

    def render(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        value = arguments.get(self.argument)
        if not isinstance(value, str) or not value.strip():
            raise MissingPromptArgument(self.name, self.argument)
        text = self.template.format(**{self.argument: value})
        return {
            "messages": [
                {
                    "role": "user",
                    "content": {"type": "text", "text": text},
                }
            ]
        }


def _dedent(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


PROMPTS: tuple[PromptTemplate, ...] = (
    PromptTemplate(
        name="code_review",
        description="Review React component code and suggest improvements",
        argument="component_path",
        argument_description="Path to the component file",
        template=_dedent(
            """
            Please review the React component at {component_path} and provide suggestions for improvements. Focus on:
            1. Code structure and organization
            2. Performance optimizations
            3. Accessibility compliance
            4. Best practices adherence
            5. Potential bugs or issues
            """
        ),
    ),
    PromptTemplate(
        name="refactor_suggest",
        description="Suggest refactoring improvements for better code structure",
        argument="file_path",
        argument_description="Path to the file to refactor",
        template=_dedent(
            """
            Analyze the file at {file_path} and suggest refactoring improvements. Consider:
            1. Code duplication elimination
            2. Function extraction opportunities
            3. Better naming conventions
            4. Improved error handling
            5. Enhanced readability
            """
        ),
    ),
    PromptTemplate(
        name="performance_audit",
        description="Analyze component performance and suggest optimizations",
        argument="component_name",
        argument_description="Name of the component to audit",
        template=_dedent(
            """
            Perform a performance audit on the component "{component_name}". Check for:
            1. Unnecessary re-renders
            2. Memory leaks
            3. Bundle size impact
            4. Load time optimizations
            5. Runtime performance bottlenecks
            """
        ),
    ),
)

_PROMPTS_BY_NAME: Dict[str, PromptTemplate] = {prompt.name: prompt for prompt in PROMPTS}


def list_prompts() -> List[Dict[str, Any]]:
    return [prompt.describe() for prompt in PROMPTS]


def get_prompt(name: str, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Render the named prompt; raises UnknownPrompt or MissingPromptArgument."""
    prompt = _PROMPTS_BY_NAME.get(name)
    if prompt is None:
        raise UnknownPrompt(name)
    return prompt.render(arguments)


__all__ = ["PROMPTS", "PromptTemplate", "get_prompt", "list_prompts"]
