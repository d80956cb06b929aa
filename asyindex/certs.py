
import os
import ssl
import uuid
import datetime
import tempfile
import ipaddress

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives import serialization
from cryptography.x509.oid import NameOID

from asyindex import logger


def generate_self_signed(cn:str = 'asyindex', hosts = None, key_exp:int = 65537, key_size:int = 2048, days:int = 365):
	"""Returns (cert_pem, key_pem, err) for a self-signed server certificate"""
	try:
		logger.debug('Generating self-signed certificate for %s' % cn)
		hosts = hosts if hosts is not None else ['localhost', '127.0.0.1']

		one_day = datetime.timedelta(1, 0, 0)
		validity = datetime.timedelta(days, 0, 0)
		now = datetime.datetime.now(datetime.timezone.utc)
		private_key = rsa.generate_private_key(
			public_exponent=key_exp,
			key_size=key_size,
		)

		alt_names = []
		for host in hosts:
			try:
				alt_names.append(x509.IPAddress(ipaddress.ip_address(host)))
			except ValueError:
				alt_names.append(x509.DNSName(host))

		name = x509.Name([
			x509.NameAttribute(NameOID.COMMON_NAME, cn),
		])
		builder = x509.CertificateBuilder()
		builder = builder.subject_name(name)
		builder = builder.issuer_name(name)
		builder = builder.not_valid_before(now - one_day)
		builder = builder.not_valid_after(now + validity)
		builder = builder.serial_number(int(uuid.uuid4()))
		builder = builder.public_key(private_key.public_key())
		builder = builder.add_extension(
			x509.BasicConstraints(ca=False, path_length=None), critical=True,
		)
		if len(alt_names) > 0:
			builder = builder.add_extension(x509.SubjectAlternativeName(alt_names), critical=False)
		certificate = builder.sign(private_key=private_key, algorithm=hashes.SHA256())

		cert_pem = certificate.public_bytes(
			encoding=serialization.Encoding.PEM,
		)
		key_pem = private_key.private_bytes(
			encoding=serialization.Encoding.PEM,
			format=serialization.PrivateFormat.TraditionalOpenSSL,
			encryption_algorithm=serialization.NoEncryption()
		)
		return cert_pem, key_pem, None
	except Exception as e:
		logger.exception('generate_self_signed')
		return None, None, e

def create_server_ssl_context(certfile:str = None, keyfile:str = None, hosts = None):
	"""
	Server side SSL context. Without a certfile a throwaway self-signed
	certificate is generated.
	"""
	ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
	if certfile is not None:
		ctx.load_cert_chain(certfile, keyfile)
		return ctx

	cert_pem, key_pem, err = generate_self_signed(hosts = hosts)
	if err is not None:
		raise err

	# load_cert_chain only reads from files
	with tempfile.TemporaryDirectory() as tmpdir:
		cert_path = os.path.join(tmpdir, 'cert.pem')
		key_path = os.path.join(tmpdir, 'key.pem')
		with open(cert_path, 'wb') as f:
			f.write(cert_pem)
		with open(key_path, 'wb') as f:
			f.write(key_pem)
		ctx.load_cert_chain(cert_path, key_path)
	return ctx
