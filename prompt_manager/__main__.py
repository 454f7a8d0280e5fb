import sys

from prompt_manager.api.cli import main

sys.exit(main())
