"""Tests for hook usage analysis."""

from __future__ import annotations

from webmap.analyzers.hooks import HookAnalyzer, aggregate_hooks, extract_hooks
from webmap.config import Limits


def test_extract_separates_builtin_and_custom_hooks() -> None:
    text = """
    const [open, setOpen] = useState(false);
    useLayoutEffect(() => {}, []);
    const cart = useCart();
    const other = useCart();
    """

    facts = extract_hooks(text, "src/Cart.tsx")

    assert [(fact.hook, fact.builtin) for fact in facts] == [
        ("useState", True),
        ("useLayoutEffect", True),
        ("useCart", False),
        ("useCart", False),
    ]


def test_builtin_names_match_whole_words_only() -> None:
    facts = extract_hooks("const useEffectful = 1; useStateMachine();", "a.ts")
    assert all(not fact.builtin for fact in facts)
    assert [fact.hook for fact in facts] == ["useEffectful", "useStateMachine"]


def test_aggregate_hooks_counts_and_file_usage() -> None:
    facts = extract_hooks("useEffect(); useCart(); useCart(); useEffect();", "a.tsx")
    facts += extract_hooks("useAuth(); useState();", "b.tsx")

    body = aggregate_hooks(facts, total_files=4, limits=Limits())

    assert body["totalFiles"] == 4
    assert body["analyzedFiles"] == 2
    assert body["totalHooksUsage"] == 6
    assert body["mostUsedHooks"] == [
        {"hook": "useEffect", "count": 2},
        {"hook": "useCart", "count": 2},
        {"hook": "useState", "count": 1},
        {"hook": "useAuth", "count": 1},
    ]
    assert body["customHooksFound"] == ["useCart", "useAuth"]
    assert body["fileUsage"] == [
        {"file": "a.tsx", "builtInHooks": ["useEffect"], "customHooks": ["useCart", "useCart"]},
        {"file": "b.tsx", "builtInHooks": ["useState"], "customHooks": ["useAuth"]},
    ]


def test_hook_analyzer_on_project(project) -> None:
    project.write(
        {
            "src/App.tsx": "useEffect(() => {}, []);",
            "src/plain.js": "console.log('no hooks');",
        }
    )

    body = HookAnalyzer().run(project.context()).to_dict()

    assert body["totalFiles"] == 2
    assert body["analyzedFiles"] == 1
    assert body["mostUsedHooks"] == [{"hook": "useEffect", "count": 1}]
