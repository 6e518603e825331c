"""Built-in contract template used when the record store has none."""

DEFAULT_CONTRACT_HTML = """
<div style="text-align: center; font-weight: bold; font-size: 1.2em; margin-bottom: 20px;">INSTRUMENTO PARTICULAR DE CONTRATO DE ASSOCIAÇÃO ENTRE CORRETOR E IMOBILIÁRIA</div>

<p>Pelo presente instrumento particular, as partes:</p>

<p><strong>I) Imobiliária:</strong> Vemplan - Creci 21294J (nome fantasia Vemplan), inscrita no CNPJ/MF sob no.: 11.321.867/0001-65, estabelecida na Avenida Pedroso de Morais, 2701, Pinheiros, São Paulo/SP, doravante denominada simplesmente IMOBILIÁRIA,</p>

<p><strong>II) Corretor Autônomo</strong> devidamente identificado e qualificado no preâmbulo do Formulário = Ficha Cadastro = o qual faz parte integrante deste instrumento, doravante denominado simplesmente CORRETOR ASSOCIADO.</p>

<h4 style="font-weight: bold; margin-top: 15px;">DO OBJETO</h4>
<p>1.1. IMOBILIÁRIA e CORRETOR ASSOCIADO coordenam, entre si, o desempenho de funções correlatas à intermediação imobiliária, tal como definidas no caput no artigo 3º da Lei 6.530/78, e ajustam critérios para a partilha dos resultados da atividade de corretagem.</p>
<p>1.2. Cada parte executará a intermediação imobiliária com liberdade e autonomia profissional, assim como por conta e riscos próprios, organizando seus critérios de atuação e harmonizando suas metodologias de trabalho, já que, por lei, tanto o CORRETOR ASSOCIADO, como a IMOBILIARIA são sujeitos aos mesmos direitos e obrigações no exercício profissional.</p>
<p>1.3. Esta associação não implica troca de serviços, pagamentos ou remunerações entre a IMOBILIÁRIA e o CORRETOR ASSOCIADO, sendo o resultado das partes alcançado somente na finalização útil da intermediação imobiliária, nos termos do artigo 725 do Código Civil, de modo que cada parte, isoladamente, responderá pela quitação dos tributos, taxas e emolumentos relativos ao seu quinhão no rateio dos resultados.</p>
<p>1.4. Consequentemente, assumem as partes que a relação entre si é de associação, diversa da relação de emprego ou da prestação de serviços, correndo cada parte, IMOBILIÁRIA e CORRETOR ASSOCIADO, os seus próprios riscos profissionais.</p>

<h4 style="font-weight: bold; margin-top: 15px;">DAS OBRIGAÇÕES</h4>
<p>2.1. IMOBILIÁRIA e CORRETOR ASSOCIADO estão obrigados a, igualmente:</p>
<ul style="list-style-type: disc; margin-left: 20px;">
  <li>2.1.1. Manter sigilo quanto às informações de seus clientes ou terceiros que ainda não estejam em domínio público e que, eventualmente, venham a ter conhecimento durante a associação;</li>
  <li>2.1.2. Não promover publicidade sem a devida autorização prévia do detentor de direitos da marca ou produto;</li>
  <li>2.1.3. Não concorrer de forma desleal entre si, desviando negócios a concorrentes, ou sem observar o rateio de resultados previamente combinado para cada negócio concluído;</li>
  <li>2.1.4. Observar o Código de Ética da profissão de corretor de imóveis.</li>
</ul>
<p>2.2. As partes estão cientes de que devem executar a atividade objeto desta associação com diligência e prudência.</p>
<p>2.3. A vigência deste acordo não impede que o CORRETOR ASSOCIADO possa exercer sua atividade profissional em caráter particular ou associado à outra imobiliária, desde que não configurada a concorrência desleal.</p>

<h4 style="font-weight: bold; margin-top: 15px;">RATEIO DE RESULTADOS</h4>
<p>3.1. Os honorários decorretagem serão determinados com observância à “Tabela de Honorários de Corretagem Imobiliária”.</p>
<p>3.2. O percentual dos honorários a ser atribuído ao CORRETOR ASSOCIADO e à IMOBILIÁRIA resultará de cada negócio imobiliário concluído.</p>
<p style="font-weight: bold;">Corretor de Imóveis</p>
<p>3.2.1. Fica estipulado que em decorrência da presente associação, ao CORRETOR ASSOCIADO caberá desempenhar a aproximação útil entre potenciais proprietários, compradores e incorporadores.</p>
<p>3.3. CORRETOR ASSOCIADO e IMOBILIARIA são livres para dispor sobre sua própria cota parte resultante de rateio.</p>
<p>3.4. Cada PARTE realizará a gestão e cobrança de seus próprios recebíveis dos respectivos clientes.</p>

<h4 style="font-weight: bold; margin-top: 15px;">REGISTRO, PRAZO E FORO</h4>
<p>3.6. Firmam este contrato de associação pelo prazo determinado de 01 (um) ano, que poderá ser renovado automaticamente.</p>
<p>3.7. Qualquer aditamento ou alteração deste contrato somente será válida se firmada por escrito.</p>
<p>3.10. As partes elegem o Foro da sede da IMOBILIÁRIA.</p>
<p>3.11. Por fim, declara o CORRETOR ASSOCIADO estar em dia com todas as obrigações legais para o exercício da profissão.</p>
"""
