import sys

from photoop.main import main

sys.exit(main())
