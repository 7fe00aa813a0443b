"""``python -m localnet.validator``: same as the pumpfun-test-validator script."""

from localnet.cli import main

if __name__ == "__main__":
    main()
