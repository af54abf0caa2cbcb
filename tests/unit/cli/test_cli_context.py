"""Tests for CLI context dependency injection."""

import os
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import typer

from src.cli.context import CLIContext, build_cli_context, get_cli_context
from src.cli.deployment.app_deployer.errors import DeploymentError
from src.infra.config import ConfigData


def _context() -> CLIContext:
    return CLIContext(
        console=Mock(),
        project_root=Path("/test"),
        k8s_controller=Mock(),
        constants=Mock(),
        config=ConfigData(),
    )


def test_cli_context_is_immutable():
    """Test that CLIContext is frozen/immutable."""
    ctx = _context()

    with pytest.raises(AttributeError):
        ctx.console = Mock()  # type: ignore[misc]


@patch("src.cli.context.get_project_root")
@patch("src.cli.context.get_k8s_controller_sync")
def test_build_cli_context_creates_all_dependencies(
    mock_k8s_controller, mock_get_root, tmp_path, monkeypatch
):
    """Test that build_cli_context creates all required dependencies."""
    monkeypatch.delenv("KUBELAUNCH_CONFIG", raising=False)
    monkeypatch.delenv("KUBELAUNCH_K8S_BACKEND", raising=False)
    monkeypatch.chdir(tmp_path)
    mock_get_root.return_value = tmp_path
    mock_k8s_controller.return_value = Mock()

    ctx = build_cli_context()

    assert ctx.console is not None
    assert ctx.project_root == tmp_path
    assert ctx.k8s_controller is mock_k8s_controller.return_value
    assert ctx.constants is not None
    assert ctx.config == ConfigData()
    mock_k8s_controller.assert_called_once_with(ctx.config.cluster)


@patch("src.cli.context.get_project_root")
@patch("src.cli.context.get_k8s_controller_sync")
def test_build_cli_context_reads_config_file(mock_k8s_controller, mock_get_root, tmp_path):
    """Test that an explicit config file feeds the context."""
    mock_get_root.return_value = tmp_path
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("config:\n  defaults:\n    app_name: api\n")

    ctx = build_cli_context(config_file)

    assert ctx.config.defaults.app_name == "api"


@patch("src.cli.context.get_project_root")
@patch("src.cli.context.get_k8s_controller_sync")
def test_build_cli_context_loads_dotenv_for_substitution(
    mock_k8s_controller, mock_get_root, tmp_path, monkeypatch
):
    """Test that .env values are visible to ${VAR} references."""
    monkeypatch.delenv("KL_TEST_IMAGE", raising=False)
    mock_get_root.return_value = tmp_path
    (tmp_path / ".env").write_text("KL_TEST_IMAGE=registry.example/app:2.0\n")
    config_file = tmp_path / "kubelaunch.yaml"
    config_file.write_text("config:\n  defaults:\n    image: ${KL_TEST_IMAGE}\n")

    try:
        ctx = build_cli_context(config_file)
    finally:
        os.environ.pop("KL_TEST_IMAGE", None)

    assert ctx.config.defaults.image == "registry.example/app:2.0"


@patch("src.cli.context.get_project_root")
def test_build_cli_context_invalid_config_raises(mock_get_root, tmp_path):
    """Test that a broken config file becomes a DeploymentError."""
    mock_get_root.return_value = tmp_path
    config_file = tmp_path / "bad.yaml"
    config_file.write_text("defaults:\n  app_name: api\n")

    with pytest.raises(DeploymentError) as excinfo:
        build_cli_context(config_file)

    assert "config" in (excinfo.value.details or "")


def test_get_cli_context_from_typer_context():
    """Test that get_cli_context retrieves from Typer context."""
    mock_ctx_obj = _context()

    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = mock_ctx_obj

    result = get_cli_context(typer_ctx)

    assert result is mock_ctx_obj


def test_get_cli_context_with_none_falls_back():
    """Test that get_cli_context creates new context when ctx is None."""
    with (
        patch("click.get_current_context", return_value=None),
        patch("src.cli.context.build_cli_context") as mock_build,
    ):
        mock_build.return_value = Mock(spec=CLIContext)

        get_cli_context(None)

        mock_build.assert_called_once()


def test_get_cli_context_with_invalid_obj_falls_back():
    """Test that get_cli_context falls back when ctx.obj is not CLIContext."""
    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = "invalid"

    with patch("src.cli.context.build_cli_context") as mock_build:
        mock_build.return_value = Mock(spec=CLIContext)

        get_cli_context(typer_ctx)

        mock_build.assert_called_once()


@patch("click.get_current_context")
def test_get_cli_context_uses_click_context_as_fallback(mock_get_click_ctx):
    """Test that get_cli_context uses click context when typer ctx is None."""
    mock_ctx_obj = _context()

    mock_click_context = Mock()
    mock_click_context.obj = mock_ctx_obj
    mock_get_click_ctx.return_value = mock_click_context

    result = get_cli_context(None)

    assert result is mock_ctx_obj
    mock_get_click_ctx.assert_called_once_with(silent=True)
