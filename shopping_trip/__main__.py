from shopping_trip.cli import main

main()
