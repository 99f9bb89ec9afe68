from vish.cli import main

main()
