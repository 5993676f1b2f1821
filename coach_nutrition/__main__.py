from coach_nutrition.cli import main

main()
