from profcheck.cli import main

main()
