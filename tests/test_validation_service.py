"""Tests for request validation"""
import pytest

from groove_locator.exceptions import InputValidationError
from groove_locator.models.workspace import InspectionMode, WorkspaceMetadata
from groove_locator.services.validation_service import (
    RequestValidationService,
    build_resolution_request,
)


class TestSafePathTokens:
    """Test the restricted worktree token grammar."""

    @pytest.mark.parametrize("token", ["wt-login", "feature/login", "a.b_c-d", "x/y/z"])
    def test_accepts_safe_tokens(self, token):
        """Test accepts safe tokens."""
        assert RequestValidationService.is_safe_path_token(token) is True

    @pytest.mark.parametrize(
        "token", ["", ".", "..", "a/../b", "./a", "a/.", "/abs", "a//b", "a/", "sp ace", "semi;colon", "a\\b"]
    )
    def test_rejects_unsafe_tokens(self, token):
        """Test rejects unsafe tokens."""
        assert RequestValidationService.is_safe_path_token(token) is False


class TestRootName:
    """Test target name validation."""

    def test_trims_name(self):
        """Test trims name."""
        assert RequestValidationService.validate_root_name("  proj ") == "proj"

    @pytest.mark.parametrize("name", [None, "", "   ", ".", "..", "a/b", "a\\b"])
    def test_rejects_invalid_names(self, name):
        """Test rejects invalid names."""
        with pytest.raises(InputValidationError) as exc_info:
            RequestValidationService.validate_root_name(name)
        assert exc_info.value.field == "rootName"


class TestKnownWorktrees:
    """Test known worktree list validation."""

    def test_none_is_empty(self):
        """Test none is empty."""
        assert RequestValidationService.validate_known_worktrees(None) == ()

    def test_dedupes_preserving_order(self):
        """Test dedupes preserving order."""
        result = RequestValidationService.validate_known_worktrees(["b", " a ", "b", "a"])
        assert result == ("b", "a")

    def test_rejects_oversized_list(self):
        """Test rejects oversized list."""
        entries = [f"wt-{i}" for i in range(129)]
        with pytest.raises(InputValidationError, match="max 128"):
            RequestValidationService.validate_known_worktrees(entries)

    def test_accepts_exactly_the_limit(self):
        """Test accepts exactly the limit."""
        entries = [f"wt-{i}" for i in range(128)]
        assert len(RequestValidationService.validate_known_worktrees(entries)) == 128

    def test_rejects_empty_entry(self):
        """Test rejects empty entry."""
        with pytest.raises(InputValidationError, match="non-empty"):
            RequestValidationService.validate_known_worktrees(["ok", "  "])

    def test_rejects_unsafe_entry(self):
        """Test rejects unsafe entry."""
        with pytest.raises(InputValidationError, match="unsafe"):
            RequestValidationService.validate_known_worktrees(["../etc"])

    def test_rejects_bare_string(self):
        """Test rejects bare string."""
        with pytest.raises(InputValidationError):
            RequestValidationService.validate_known_worktrees("wt-login")


class TestRootOverride:
    """Test explicit root override validation."""

    def test_accepts_existing_absolute_directory(self, temp_dir):
        """Test accepts existing absolute directory."""
        assert RequestValidationService.validate_root_override(f" {temp_dir} ") == temp_dir

    def test_rejects_relative_path(self):
        """Test rejects relative path."""
        with pytest.raises(InputValidationError, match="absolute"):
            RequestValidationService.validate_root_override("projects/next")

    def test_rejects_missing_directory(self, temp_dir):
        """Test rejects missing directory."""
        with pytest.raises(InputValidationError, match="not an existing"):
            RequestValidationService.validate_root_override(str(temp_dir / "missing"))

    def test_rejects_file(self, temp_dir):
        """Test that a file is not a valid override."""
        target = temp_dir / "file.txt"
        target.write_text("x")
        with pytest.raises(InputValidationError):
            RequestValidationService.validate_root_override(str(target))


class TestRelativeDirAndVersion:
    """Test --dir and version hint validation."""

    def test_dir_none_passes_through(self):
        """Test dir none passes through."""
        assert RequestValidationService.validate_relative_dir(None) is None

    def test_dir_rejects_absolute(self):
        """Test dir rejects absolute."""
        with pytest.raises(InputValidationError, match="relative"):
            RequestValidationService.validate_relative_dir("/tmp/x")

    def test_dir_rejects_parent_segments(self):
        """Test dir rejects parent segments."""
        with pytest.raises(InputValidationError, match="unsafe"):
            RequestValidationService.validate_relative_dir("../x")

    @pytest.mark.parametrize("raw,expected", [("2", 2), (" 2.5 ", 2.5), (3, 3), ("", None), (None, None)])
    def test_version_parsing(self, raw, expected):
        """Test parsing version hints."""
        assert RequestValidationService.validate_version(raw) == expected

    @pytest.mark.parametrize("raw", ["two", "nan", "inf", True])
    def test_version_rejects_non_numeric(self, raw):
        """Test version rejects non numeric."""
        with pytest.raises(InputValidationError):
            RequestValidationService.validate_version(raw)


class TestBuildResolutionRequest:
    """Test assembling a resolution request from raw input."""

    def test_builds_context_with_expected_metadata(self):
        """Test builds context with expected metadata."""
        request = build_resolution_request(
            root_name="proj",
            known_worktrees=["wt-login"],
            version="2",
            created_at=" 2024-01-01 ",
        )
        assert request.root_override is None
        context = request.context
        assert context.target_name == "proj"
        assert context.known_worktrees == ("wt-login",)
        assert context.expected_metadata == WorkspaceMetadata(
            version=2, root_name="proj", created_at="2024-01-01"
        )
        assert context.mode is InspectionMode.LIST

    def test_override_skips_name_validation(self, temp_dir):
        """Test override skips name validation."""
        request = build_resolution_request(root_name=None, workspace_root=str(temp_dir))
        assert request.root_override == str(temp_dir)
        assert request.context is None

    def test_oversized_known_worktrees_fail_before_override(self, temp_dir):
        """Test oversized known worktrees fail before override."""
        with pytest.raises(InputValidationError):
            build_resolution_request(
                workspace_root=str(temp_dir),
                known_worktrees=[f"wt-{i}" for i in range(200)],
            )

    def test_blank_override_is_rejected(self):
        """Test blank override is rejected."""
        with pytest.raises(InputValidationError):
            build_resolution_request(root_name="proj", workspace_root="   ")

    def test_create_mode_is_carried(self):
        """Test create mode is carried."""
        request = build_resolution_request(root_name="proj", mode=InspectionMode.CREATE)
        assert request.context.mode is InspectionMode.CREATE
