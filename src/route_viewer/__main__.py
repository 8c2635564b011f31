from src.route_viewer.cli import main

main()
