"""Package entry point for ``python -m wte_script``.

WHY: Users run the compiler as ``python -m wte_script events.csv`` when the
console script is not on PATH.

HOW: Delegates to the CLI's main() function.
"""

from wte_script.cli import main

if __name__ == "__main__":
    main()
