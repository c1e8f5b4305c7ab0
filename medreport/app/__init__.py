"""App modules for medreport: lifecycle, rendering, and HTTP routers."""
