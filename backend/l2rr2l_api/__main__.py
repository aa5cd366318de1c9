from l2rr2l_api.serve import main

main()
