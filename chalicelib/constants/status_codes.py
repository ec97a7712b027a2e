http200 = 200
http400 = 400
http401 = 401
http403 = 403
http404 = 404
http500 = 500
