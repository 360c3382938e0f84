from clusterscan.cli.main import main

main()
