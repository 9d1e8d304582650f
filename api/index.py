from pdf_service.serverless import IndexHandler as handler
