import sys

from steepest_descent.main import main

sys.exit(main())
