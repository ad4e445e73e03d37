"""
Command line entry point

    pkg-mgr [OPTIONS]           sync the configured channel (default)
    pkg-mgr clean [OPTIONS]     remove all packages, database and metadata
    pkg-mgr status [OPTIONS]    show repository state
"""

import click
from click.core import ParameterSource

from prismrepo import config
from prismrepo.common.config_loader import ConfigLoader
from prismrepo.common.logging_utils import setup_logging
from prismrepo.orchestrator.package_manager import PackageManager


def common_options(func):
    """Options shared by the sync, clean and status commands"""
    options = [
        click.option('--repo-name', default=config.REPO_NAME, show_default=True, help='Repository name'),
        click.option('--arch', 'architecture', default=config.ARCHITECTURE, show_default=True,
                     help='Target architecture'),
        click.option('--repo-arch-dir', default=None,
                     help='Architecture-specific repo directory (auto-determined)'),
        click.option('--api-dir', default=config.API_DIR, show_default=True, help='API directory for metadata'),
        click.option('--gitlab-token', default=None, help=f'GitLab token (overrides {config.ENV_GITLAB_TOKEN} env)'),
        click.option('--gitlab-url', default=None, help=f'GitLab base URL (overrides {config.ENV_GITLAB_URL} env)'),
        click.option('--project-id', default=None, help=f'Hosting project id (overrides {config.ENV_PROJECT_ID} env)'),
        click.option('--config', 'packages_config_file', default=config.PACKAGES_CONFIG_FILE, show_default=True,
                     help='Packages configuration file'),
        click.option('--testing', is_flag=True, help='Use testing repository instead of stable'),
        click.option('--debug', is_flag=True, help='Enable debug output'),
        click.option('--verbose', is_flag=True, help='Enable verbose output'),
        click.option('--log-file', default=None, help='Also write the log to this file'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _explicit_options(ctx, params):
    """Options the user actually gave on this command line level"""
    return {name: value for name, value in params.items()
            if ctx.get_parameter_source(name) is not ParameterSource.DEFAULT}


def _subcommand_options(ctx, log_file, kwargs):
    """
    Merge options given before the subcommand into its own.

    An option given after the subcommand wins over the same option
    given before it.
    """
    params = dict(kwargs, log_file=log_file)
    for name, value in ctx.obj.items():
        if name in params and ctx.get_parameter_source(name) is ParameterSource.DEFAULT:
            params[name] = value
    return params


def _run(mode, log_file=None, **kwargs):
    setup_logging(kwargs.get('debug', False), kwargs.get('verbose', False), log_file)
    repo_config = ConfigLoader.build_repo_config(**kwargs)
    return PackageManager(repo_config).run(mode)


@click.group(invoke_without_command=True)
@common_options
@click.option('--force', is_flag=True, help='Download desired packages again even if present')
@click.option('--strict-downloads', is_flag=True, help='Exit non-zero when any download failed')
@click.pass_context
def cli(ctx, log_file, **kwargs):
    """Manages the PrismLinux package repository.

    Syncs packages, updates the repository database and generates
    metadata for the web UI.
    """
    ctx.ensure_object(dict)
    ctx.obj.update(_explicit_options(ctx, dict(kwargs, log_file=log_file)))
    if ctx.invoked_subcommand is not None:
        return
    ctx.exit(_run('sync', log_file, **kwargs))


@cli.command()
@common_options
@click.pass_context
def clean(ctx, log_file, **kwargs):
    """Remove all packages and repository files"""
    ctx.exit(_run('clean', **_subcommand_options(ctx, log_file, kwargs)))


@cli.command()
@common_options
@click.pass_context
def status(ctx, log_file, **kwargs):
    """Show repository structure and current status"""
    ctx.exit(_run('status', **_subcommand_options(ctx, log_file, kwargs)))


def main():
    cli()


if __name__ == '__main__':
    main()
