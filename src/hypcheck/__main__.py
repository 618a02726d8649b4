"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from hypcheck.infrastructure.di.container import HypCheckContainer
from hypcheck.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = HypCheckContainer()
    deps = CLIDependencies(
        registry=container.get_registry(),
        astroid_gateway=container.get_astroid_gateway(),
        filesystem=container.get_filesystem_gateway(),
        config_source=container.get_config_source(),
        reporter=container.get_reporter(),
    )
    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
