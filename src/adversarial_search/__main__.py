import sys

from adversarial_search.cli import main

sys.exit(main())
