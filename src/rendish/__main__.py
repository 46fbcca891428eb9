"""Allow ``python -m rendish`` invocation."""

from rendish.cli.app import main

if __name__ == "__main__":
    main()
