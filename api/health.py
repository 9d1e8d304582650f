from pdf_service.serverless import HealthHandler as handler
