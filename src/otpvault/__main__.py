"""Allow ``python -m otpvault``."""

from otpvault.cli import main

if __name__ == "__main__":
    main()
