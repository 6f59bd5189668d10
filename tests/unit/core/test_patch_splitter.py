"""Unit tests for splitting multi-file diffs."""

from mcp_git_blame.core.patch_splitter import (
    index_patches,
    split_patches,
    split_sections,
    strip_side_prefix,
)

SECTION_A = """diff --git a/src/a.py b/src/a.py
index 1111111..2222222 100644
--- a/src/a.py
+++ b/src/a.py
@@ -1 +1,2 @@
 keep
+added"""

SECTION_B = """diff --git a/docs/old name.md b/docs/new name.md
similarity index 90%
rename from docs/old name.md
rename to docs/new name.md"""

SECTION_C = """diff --git a/img/logo.png b/img/logo.png
new file mode 100644
index 0000000..3333333
Binary files /dev/null and b/img/logo.png differ
"""

DIFF = "\n".join([SECTION_A, SECTION_B, SECTION_C])


class TestSplitSections:
    """Tests for split_sections()."""

    def test_sections_in_input_order(self):
        sections = split_sections(DIFF)

        assert [s.b_path for s in sections] == [
            "b/src/a.py",
            "b/docs/new name.md",
            "b/img/logo.png",
        ]

    def test_sections_reconstruct_input(self):
        sections = split_sections(DIFF)

        assert "\n".join(s.patch for s in sections) == DIFF

    def test_section_includes_its_header(self):
        first = split_sections(DIFF)[0]

        assert first.patch.startswith("diff --git a/src/a.py b/src/a.py\n")
        assert first.patch.endswith("+added")

    def test_text_before_first_header_is_ignored(self):
        show_output = "commit abc\nAuthor: A <a@x>\n\n    message\n\n" + SECTION_A

        sections = split_sections(show_output)

        assert len(sections) == 1
        assert sections[0].patch == SECTION_A

    def test_no_headers_means_no_sections(self):
        assert split_sections("just some text\n") == []
        assert split_sections("") == []


class TestSplitPatches:
    """Tests for the path index."""

    def test_both_sides_map_to_same_text(self):
        index = split_patches(DIFF)

        assert index["docs/old name.md"] == SECTION_B
        assert index["docs/new name.md"] == SECTION_B
        assert index["src/a.py"] == SECTION_A

    def test_three_files_four_keys(self):
        index = split_patches(DIFF)

        assert set(index) == {
            "src/a.py",
            "docs/old name.md",
            "docs/new name.md",
            "img/logo.png",
        }

    def test_later_section_wins_on_collision(self):
        first = "diff --git a/x.txt b/x.txt\n-one"
        second = "diff --git a/y.txt b/x.txt\n-two"

        index = split_patches(first + "\n" + second)

        assert index["x.txt"] == second
        assert index["y.txt"] == second

    def test_only_one_prefix_is_stripped(self):
        diff = "diff --git a/b/nested.txt b/b/nested.txt\n+x"

        index = split_patches(diff)

        assert set(index) == {"b/nested.txt"}

    def test_index_patches_accepts_prebuilt_sections(self):
        sections = split_sections(DIFF)

        assert index_patches(sections) == split_patches(DIFF)


def test_strip_side_prefix():
    assert strip_side_prefix("a/src/x.py") == "src/x.py"
    assert strip_side_prefix("b/src/x.py") == "src/x.py"
    assert strip_side_prefix("src/x.py") == "src/x.py"
