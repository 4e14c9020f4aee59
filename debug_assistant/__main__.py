import sys

from debug_assistant.cli import main

sys.exit(main())
