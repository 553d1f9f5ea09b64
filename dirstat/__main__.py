from dirstat.cli import main


main()
