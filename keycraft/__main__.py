# keycraft/__main__.py
import sys

from keycraft.main import main

sys.exit(main())
