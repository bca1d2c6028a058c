import sys

from relpub.main import main

sys.exit(main())
