from seeyou_cup.server import main

main()
