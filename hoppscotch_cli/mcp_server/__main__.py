from hoppscotch_cli.mcp_server import main

main()
