from blockminmax.main import main

main()
