import sys

from workshop_manifests.cli import main

if __name__ == '__main__':
    sys.exit(main())
