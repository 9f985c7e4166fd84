import sys

from curve_integrator.main import main

if __name__ == "__main__":
    sys.exit(main())
