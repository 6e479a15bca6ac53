import textwrap

import pytest

FENCE = "```"


def quiz(header: str, *options: str, inside: bool = True) -> str:
    """Markdown for one masteryls block; options go inside the fence or right after it."""
    opts = "\n".join(options)
    if inside:
        body = header + ("\n" + opts if opts else "")
        return f"{FENCE}masteryls\n{body}\n{FENCE}\n"
    return f"{FENCE}masteryls\n{header}\n{FENCE}\n" + (opts + "\n" if opts else "")


@pytest.fixture
def course_dir(tmp_path):
    """Two near-identical cow documents sharing a quiz id, plus a clean one."""
    dup = '{"id":"69050fe2-9e9a-45f4-9f79-8361e6b6cbde","title":"Cows","type":"multiple-choice","body":"How many stomach chambers?"}'
    cow = textwrap.dedent("""\
        # Cows

        Cows are ruminants.

        """) + quiz(dup, "- [ ] One", "- [x] Four")
    (tmp_path / "cow.md").write_text(cow, encoding="utf-8")
    variants = tmp_path / "variants"
    variants.mkdir()
    (variants / "cow.md").write_text(cow.replace("# Cows", "# Cows (v2)"), encoding="utf-8")
    clean = textwrap.dedent("""\
        # Svelte

        ```javascript
        const x === 1;
        - [x] not a quiz option
        ```

        """) + quiz('{"id":"svelte-1","title":"Stores","type":"essay","body":"Explain stores."}')
    (tmp_path / "svelte.md").write_text(clean, encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not markdown", encoding="utf-8")
    return tmp_path
