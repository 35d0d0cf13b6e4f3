from rtcheck.cli.app import main

main()
