from oci_exporter.main import main

main()
