"""Console entry points for the weather client and server"""
