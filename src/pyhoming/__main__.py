import sys

from pyhoming.runner import main

sys.exit(main())
