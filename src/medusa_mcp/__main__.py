from medusa_mcp.cli import main

main()
