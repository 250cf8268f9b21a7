import sys

from minishell.shell import main

sys.exit(main())
