from taskglitch.cli.main import main

main()
