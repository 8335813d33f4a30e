"""
测试用配置：服务器地址、账号、示例 PROPFIND 响应。

仅在此处维护，conftest 及各 test_*.py 均从此导入。
"""

# ---------- 服务器与路径 ----------
DAV_HOST = "dav.example.com"
DAV_BASE_URL = f"https://{DAV_HOST}/files/"
DAV_OTHER_URL = "https://other.org/share/"

# ---------- 账号 ----------
DAV_LOGIN = "u"
DAV_PASSWORD = "p"
DEFAULT_LOGIN = "d"
DEFAULT_PASSWORD = "dp"

# ---------- PROPFIND 响应 ----------
# 两个条目：A 有完整属性（text/plain, 13 字节），B 没有任何属性
MULTISTATUS_TWO_ENTRIES = b"""<?xml version="1.0" encoding="utf-8"?>
<d:multistatus xmlns:d="DAV:">
  <d:response>
    <d:href>/files/a.txt</d:href>
    <d:propstat>
      <d:prop>
        <d:getcontentlength>13</d:getcontentlength>
        <d:getlastmodified>Tue, 02 Jan 2024 03:04:05 GMT</d:getlastmodified>
        <d:getcontenttype>text/plain</d:getcontenttype>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/files/b</d:href>
  </d:response>
</d:multistatus>"""

# 集合自身 + 两个文件，类型与大小各不相同
MULTISTATUS_DIRECTORY = b"""<?xml version="1.0" encoding="utf-8"?>
<d:multistatus xmlns:d="DAV:">
  <d:response>
    <d:href>/files/</d:href>
    <d:propstat>
      <d:prop>
        <d:getlastmodified>Mon, 01 Jan 2024 00:00:00 GMT</d:getlastmodified>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/files/report.pdf</d:href>
    <d:propstat>
      <d:prop>
        <d:getcontentlength>2048</d:getcontentlength>
        <d:getcontenttype>application/pdf</d:getcontenttype>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/files/notes.txt</d:href>
    <d:propstat>
      <d:prop>
        <d:getcontentlength>10</d:getcontentlength>
        <d:getcontenttype>text/plain; charset=utf-8</d:getcontenttype>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>"""

# 百分号编码的集合路径：服务端返回 /my%20files/，调用方写作 "my files"
MULTISTATUS_ENCODED_COLLECTION = b"""<?xml version="1.0" encoding="utf-8"?>
<d:multistatus xmlns:d="DAV:">
  <d:response>
    <d:href>/my%20files/</d:href>
    <d:propstat>
      <d:prop>
        <d:getlastmodified>Mon, 01 Jan 2024 00:00:00 GMT</d:getlastmodified>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/my%20files/a.txt</d:href>
    <d:propstat>
      <d:prop>
        <d:getcontentlength>3</d:getcontentlength>
        <d:getcontenttype>text/plain</d:getcontenttype>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>"""

NOT_MULTISTATUS = b"""<?xml version="1.0" encoding="utf-8"?>
<d:response xmlns:d="DAV:"><d:href>/files/</d:href></d:response>"""

# sabre/dav 风格的错误响应体
SABRE_ERROR = b"""<?xml version="1.0" encoding="utf-8"?>
<d:error xmlns:d="DAV:" xmlns:s="http://sabredav.org/ns">
  <s:exception>Sabre\\DAV\\Exception\\NotFound</s:exception>
  <s:message>File with name missing.txt could not be located</s:message>
</d:error>"""
