from pdf_service.serverless import ExtractTextHandler as handler
