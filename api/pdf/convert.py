from pdf_service.serverless import ConvertHandler as handler
