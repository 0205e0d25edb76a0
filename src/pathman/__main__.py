from pathman.cli import main

main()
