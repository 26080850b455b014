import sys

from mobiledev.cli.handlers import main as run_main


def main():
    try:
        return run_main()
    except FileNotFoundError as exc:
        print("error:", exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
