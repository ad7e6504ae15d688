"""External service integrations for JeevesBot"""
