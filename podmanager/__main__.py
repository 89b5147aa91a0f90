import sys

from podmanager.main import main

sys.exit(main())
