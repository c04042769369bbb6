"""Detectability calculator -- thin wrapper around horizon.calculator.

Lets ``python scripts/horizon_calculator.py`` work from the repository root
without installing the package.

CLI usage::

    python scripts/horizon_calculator.py --features 20000 --samples 200 --variance 0.2 --effect 0.1

For library usage::

    from horizon import compute_detectability
"""

import os
import sys

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, REPO_ROOT)

from horizon.calculator import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
