"""Test the "publish" command."""

import argparse

import pytest

from modkitctl import repository, settings
from modkitctl.commands import publish


@pytest.fixture
def initialized(workspace):
    """Get a workspace whose repository was bootstrapped."""
    repository.initialize(workspace)
    return workspace


def make_args(workspace, dry_run=False) -> argparse.Namespace:
    """Build the command's arguments."""
    return argparse.Namespace(workspace=workspace, dry_run=dry_run)


def publish_fake_wheel(workspace, version="0.0.1"):
    """Put a wheel of the workspace project into the repository."""
    name = repository.read_project_name(workspace)
    wheel = repository.repository_dir(workspace) / f"{name}-{version}-py3-none-any.whl"
    wheel.touch()
    return wheel


def test_get_help():
    """Test the help text."""
    assert "publish it to the local repository" in publish.get_help()


def test_run_requires_repository(workspace, mocker):
    """Test publishing before repo_init raises."""
    build_wheel = mocker.patch.object(publish.repository, "build_wheel")
    with pytest.raises(repository.RepositoryNotReadyError):
        publish.run(make_args(workspace))
    build_wheel.assert_not_called()


def test_run(initialized, mocker, capsys):
    """Test the module is built into the repository."""
    build_wheel = mocker.patch.object(
        publish.repository, "build_wheel", return_value=True
    )
    assert publish.run(make_args(initialized))
    build_wheel.assert_called_once()
    workspace, wheel_dir = build_wheel.call_args.args
    assert workspace == initialized
    assert wheel_dir != repository.repository_dir(initialized)
    assert not wheel_dir.exists()
    name = repository.read_project_name(initialized)
    assert f"Published '{name}'" in capsys.readouterr().out


def test_run_build_failure_keeps_published(initialized, mocker):
    """Test a failed build fails the command and keeps the published wheel."""
    existing = publish_fake_wheel(initialized)
    settings.runtime.update(yes=True)
    mocker.patch.object(publish.repository, "build_wheel", return_value=False)

    assert not publish.run(make_args(initialized))

    assert existing.exists()
    assert repository.list_packages(initialized) == [existing]


def test_run_dry_run(initialized, mocker, capsys):
    """Test --dry-run builds and removes nothing."""
    existing = publish_fake_wheel(initialized)
    build_wheel = mocker.patch.object(publish.repository, "build_wheel")
    confirm = mocker.patch.object(publish.shell_utils, "confirm")

    assert publish.run(make_args(initialized, dry_run=True))

    build_wheel.assert_not_called()
    confirm.assert_not_called()
    assert existing.exists()
    assert capsys.readouterr().out.startswith("What if: Publishing")


def test_run_replaces_published_after_confirmation(initialized, mocker):
    """Test earlier wheels of the project are replaced once confirmed."""
    existing = publish_fake_wheel(initialized)
    unrelated = repository.repository_dir(initialized) / "other-1.0-py3-none-any.whl"
    unrelated.touch()
    mocker.patch.object(publish.shell_utils, "confirm", return_value=True)
    build_wheel = mocker.patch.object(
        publish.repository, "build_wheel", return_value=True
    )

    assert publish.run(make_args(initialized))

    assert not existing.exists()
    assert unrelated.exists()
    build_wheel.assert_called_once()


def test_run_keeps_published_when_declined(initialized, mocker, caplog):
    """Test declining the replacement publishes nothing."""
    caplog.set_level("INFO")
    existing = publish_fake_wheel(initialized)
    mocker.patch.object(publish.shell_utils, "confirm", return_value=False)
    build_wheel = mocker.patch.object(publish.repository, "build_wheel")

    assert not publish.run(make_args(initialized))

    assert existing.exists()
    build_wheel.assert_not_called()
    assert caplog.messages[-1] == "Nothing was published."


def test_confirm_replacement_nothing_published(mocker):
    """Test nothing needs confirming when the project was never published."""
    confirm = mocker.patch.object(publish.shell_utils, "confirm")
    assert publish.confirm_replacement(None, [])
    confirm.assert_not_called()


def test_run_swaps_in_new_wheel(initialized, mocker):
    """Test a successful build adds the new wheel and drops the superseded one."""
    existing = publish_fake_wheel(initialized, version="0.0.1")
    settings.runtime.update(yes=True)
    name = repository.read_project_name(initialized)

    def fake_build(workspace, wheel_dir):
        (wheel_dir / f"{name}-0.0.2-py3-none-any.whl").touch()
        return True

    mocker.patch.object(publish.repository, "build_wheel", side_effect=fake_build)

    assert publish.run(make_args(initialized))

    assert not existing.exists()
    assert [wheel.name for wheel in repository.list_packages(initialized)] == [
        f"{name}-0.0.2-py3-none-any.whl"
    ]


def test_run_rebuilds_same_version_in_place(initialized, mocker):
    """Test rebuilding an unchanged version keeps exactly one wheel."""
    existing = publish_fake_wheel(initialized)
    settings.runtime.update(yes=True)

    def fake_build(workspace, wheel_dir):
        (wheel_dir / existing.name).write_text("rebuilt")
        return True

    mocker.patch.object(publish.repository, "build_wheel", side_effect=fake_build)

    assert publish.run(make_args(initialized))

    assert repository.list_packages(initialized) == [existing]
    assert existing.read_text() == "rebuilt"
