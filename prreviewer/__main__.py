import sys

from prreviewer.runner import main

sys.exit(main())
