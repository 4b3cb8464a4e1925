from nre_tracker.server import main

main()
