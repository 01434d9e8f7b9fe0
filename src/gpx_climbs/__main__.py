from gpx_climbs.cli import main

main()
