"""Shared command-line options for commands that take provisioner settings."""

import functools
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import rich_click as click

from masterless.core import ConfigLoader, build_config, resolve_local_paths
from masterless.models.config import ProvisionerConfig


def parse_facts(ctx, param, values: Tuple[str, ...]) -> Dict[str, str]:
    """Click callback turning NAME=VALUE pairs into a dict."""
    facts = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}")
        facts[name] = value
    return facts


def provisioner_options(func):
    """Attach every provisioner setting as an option."""
    options = [
        click.option(
            "--config",
            "-c",
            "config_path",
            type=click.Path(dir_okay=False),
            help="YAML file with provisioner settings",
        ),
        click.option(
            "--manifest", "-m", help="Manifest file or directory to apply"
        ),
        click.option("--manifest-dir", help="Extra manifest directory to stage"),
        click.option(
            "--module-path",
            "module_paths",
            multiple=True,
            help="Local module directory (repeatable, search order)",
        ),
        click.option("--hiera-config", help="Hiera configuration file"),
        click.option(
            "--fact",
            "facts",
            multiple=True,
            callback=parse_facts,
            help="External fact as NAME=VALUE (repeatable)",
        ),
        click.option("--staging-dir", help="Remote staging directory"),
        click.option("--working-dir", help="Remote directory puppet runs from"),
        click.option("--puppet-bin-dir", help="Remote directory holding puppet"),
        click.option(
            "--extra-arg",
            "extra_arguments",
            multiple=True,
            help="Extra argument for puppet apply (repeatable)",
        ),
        click.option(
            "--clean/--no-clean",
            default=None,
            help="Remove the staging directory afterwards",
        ),
        click.option(
            "--ignore-exit-codes/--no-ignore-exit-codes",
            default=None,
            help="Report non-zero puppet exits instead of failing",
        ),
        click.option(
            "--prevent-sudo/--sudo",
            default=None,
            help="Run puppet as the connecting user",
        ),
        click.option(
            "--install-agent/--no-install-agent",
            default=None,
            help="Install the puppet agent before staging",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_overrides(options: Dict[str, Any]) -> Dict[str, Any]:
    """Map option values onto config-file keys, skipping unset ones."""
    mapping = {
        "manifest": "manifest_file",
        "manifest_dir": "manifest_dir",
        "hiera_config": "hiera_config_path",
        "staging_dir": "staging_directory",
        "working_dir": "working_directory",
        "puppet_bin_dir": "puppet_bin_dir",
        "clean": "clean_staging_directory",
        "ignore_exit_codes": "ignore_exit_codes",
        "prevent_sudo": "prevent_sudo",
        "install_agent": "install_agent",
    }
    overrides = {
        key: options[name]
        for name, key in mapping.items()
        if options.get(name) is not None
    }
    if options.get("module_paths"):
        overrides["module_paths"] = list(options["module_paths"])
    if options.get("extra_arguments"):
        overrides["extra_arguments"] = list(options["extra_arguments"])
    if options.get("facts"):
        overrides["facter"] = dict(options["facts"])
    return overrides


def load_provisioner_config(
    config_path: Optional[str], options: Dict[str, Any]
) -> ProvisionerConfig:
    """Load settings from an optional file with options layered on top."""
    overrides = build_overrides(options)
    if config_path:
        return ConfigLoader(config_path).load(overrides)
    return build_config(resolve_local_paths(overrides, Path.cwd()))


def pass_options(func):
    """Collect provisioner option values into a single dict argument."""
    names = (
        "manifest",
        "manifest_dir",
        "module_paths",
        "hiera_config",
        "facts",
        "staging_dir",
        "working_dir",
        "puppet_bin_dir",
        "extra_arguments",
        "clean",
        "ignore_exit_codes",
        "prevent_sudo",
        "install_agent",
    )

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        options = {name: kwargs.pop(name, None) for name in names}
        return func(*args, options=options, **kwargs)

    return wrapper
