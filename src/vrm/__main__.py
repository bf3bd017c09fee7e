from vrm.main import main

main()
