import sys


def main():
    """Console script entry point."""
    try:
        from iconcraft.cli.commands import cli
        cli()
    except Exception as e:
        print(f"Critical Error in CLI: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
