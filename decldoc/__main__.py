"""Allow ``python -m decldoc``."""

from decldoc.cli import main

if __name__ == "__main__":
    main()
