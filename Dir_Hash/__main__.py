import sys

from Dir_Hash.cli.get_dir_hash import main


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
