"""Tests for the tag commands."""


class TestTagCommands:
    def test_add_and_list(self, run):
        run("tag", "add", "Work", "--color", "#667eea")
        run("add", "GitHub", "github.com", "--tag", "Work")

        result = run("tag", "list")

        assert result.exit_code == 0
        assert "Work" in result.output
        assert "#667eea" in result.output

    def test_list_empty(self, run):
        assert "No tags yet" in run("tag", "list").output

    def test_duplicate_name(self, run):
        run("tag", "add", "Work")

        result = run("tag", "add", "work")

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_invalid_color(self, run):
        result = run("tag", "add", "Work", "--color", "blue")
        assert result.exit_code == 1
        assert "color" in result.output

    def test_rename(self, run, stored):
        run("tag", "add", "Work")

        result = run("tag", "rename", "Work", "Job")

        assert result.exit_code == 0
        assert stored()["data"]["tags"][0]["name"] == "Job"

    def test_recolor(self, run, stored):
        run("tag", "add", "Work")
        run("tag", "recolor", "Work", "#FF6B6B")
        assert stored()["data"]["tags"][0]["color"] == "#FF6B6B"

    def test_delete_prunes_websites(self, run, stored):
        run("tag", "add", "Work")
        run("add", "GitHub", "github.com", "--tag", "Work")

        result = run("tag", "delete", "Work", "-f")

        assert result.exit_code == 0
        data = stored()["data"]
        assert data["tags"] == []
        assert data["websites"][0]["tagIds"] == []
