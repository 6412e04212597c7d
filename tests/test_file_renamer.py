"""Tests for bzr_portal.file_renamer"""

import pytest
from bzr_portal.file_renamer import transliterate_tree


def _touch(path, text="x"):
    path.write_text(text, encoding="utf-8")


class TestTransliterateTree:
    def test_renames_files(self, tmp_path):
        _touch(tmp_path / "Упутство.pdf")
        _touch(tmp_path / "izveštaj.docx")
        _touch(tmp_path / "plain.txt")

        assert transliterate_tree(str(tmp_path)) == 2
        names = sorted(p.name for p in tmp_path.iterdir())
        assert names == ["Uputstvo.pdf", "izvestaj.docx", "plain.txt"]

    def test_recursive_renames_directory_then_contents(self, tmp_path):
        sub = tmp_path / "Обуке"
        sub.mkdir()
        _touch(sub / "тест.txt", "sadržaj")

        assert transliterate_tree(str(tmp_path)) == 2
        moved = tmp_path / "Obuke" / "test.txt"
        assert moved.read_text(encoding="utf-8") == "sadržaj"

    def test_no_recursive_skips_directories(self, tmp_path):
        sub = tmp_path / "Обуке"
        sub.mkdir()
        _touch(sub / "тест.txt")
        _touch(tmp_path / "џак.txt")

        assert transliterate_tree(str(tmp_path), recursive=False) == 1
        assert (tmp_path / "dzak.txt").exists()
        assert (tmp_path / "Обуке" / "тест.txt").exists()

    def test_existing_target_is_left_alone(self, tmp_path):
        _touch(tmp_path / "plan.txt", "latin")
        _touch(tmp_path / "план.txt", "cyrillic")

        assert transliterate_tree(str(tmp_path)) == 0
        assert (tmp_path / "plan.txt").read_text(encoding="utf-8") == "latin"
        assert (tmp_path / "план.txt").exists()

    def test_collision_inside_unrenamed_directory_still_processed(self, tmp_path):
        (tmp_path / "docs").mkdir()
        (tmp_path / "доцс").mkdir()
        _touch(tmp_path / "доцс" / "ћуп.txt")

        assert transliterate_tree(str(tmp_path)) == 1
        assert (tmp_path / "доцс" / "cup.txt").exists()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            transliterate_tree(str(tmp_path / "nema"))
