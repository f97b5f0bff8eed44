from slm.main import main

main()
